"""Static table of searchable regions and their main cities.

Each country lists its first-level regions in a stable order. City lists are
ordered by relevance (roughly population), which is the order a country or
state wide search visits them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class Region:
    code: str
    name: str
    cities: Tuple[str, ...]
    aliases: Tuple[str, ...] = ()

    def qualified_cities(self) -> Tuple[str, ...]:
        return tuple(f"{city}, {self.code}" for city in self.cities)


@dataclass(frozen=True)
class Country:
    code: str
    name: str
    aliases: Tuple[str, ...]
    regions: Tuple[Region, ...]

    def all_cities(self) -> Tuple[str, ...]:
        cities = []
        for region in self.regions:
            cities.extend(region.qualified_cities())
        return tuple(cities)


BRAZIL = Country(
    code="BR",
    name="Brasil",
    aliases=("br", "brasil", "brazil"),
    regions=(
        Region("GO", "Goiás", (
            "Goiânia", "Aparecida de Goiânia", "Anápolis", "Rio Verde", "Luziânia",
            "Águas Lindas de Goiás", "Valparaíso de Goiás", "Trindade", "Formosa", "Novo Gama",
            "Senador Canedo", "Catalão", "Itumbiara", "Jataí", "Planaltina",
            "Caldas Novas", "Santo Antônio do Descoberto", "Cidade Ocidental", "Inhumas", "Mineiros",
            "Quirinópolis", "Goianésia", "Jaraguá", "Morrinhos", "Porangatu",
            "Uruaçu", "Goiatuba", "Niquelândia", "Ceres", "Santa Helena de Goiás",
            "Padre Bernardo", "Pirenópolis", "Cristalina", "Ipameri", "Pires do Rio",
            "Alexânia", "Posse", "Hidrolândia", "Goianira", "Nerópolis",
        )),
        Region("SP", "São Paulo", (
            "São Paulo", "Guarulhos", "Campinas", "São Bernardo do Campo", "Santo André",
            "Osasco", "São José dos Campos", "Ribeirão Preto", "Sorocaba", "Santos",
            "Mauá", "São José do Rio Preto", "Mogi das Cruzes", "Diadema", "Jundiaí",
            "Piracicaba", "Carapicuíba", "Bauru", "Itaquaquecetuba", "São Vicente",
            "Franca", "Praia Grande", "Guarujá", "Taubaté", "Limeira",
            "Suzano", "Taboão da Serra", "Sumaré", "Barueri", "Embu das Artes",
            "São Carlos", "Indaiatuba", "Cotia", "Americana", "Marília",
            "Araraquara", "Jacareí", "Hortolândia", "Presidente Prudente", "Rio Claro",
        )),
        Region("RJ", "Rio de Janeiro", (
            "Rio de Janeiro", "São Gonçalo", "Duque de Caxias", "Nova Iguaçu", "Niterói",
            "Belford Roxo", "Campos dos Goytacazes", "São João de Meriti", "Petrópolis", "Volta Redonda",
            "Magé", "Itaboraí", "Macaé", "Mesquita", "Nilópolis",
            "Cabo Frio", "Nova Friburgo", "Barra Mansa", "Angra dos Reis", "Teresópolis",
            "Resende", "Queimados", "Maricá", "Rio das Ostras", "Araruama",
        )),
        Region("MG", "Minas Gerais", (
            "Belo Horizonte", "Uberlândia", "Contagem", "Juiz de Fora", "Betim",
            "Montes Claros", "Ribeirão das Neves", "Uberaba", "Governador Valadares", "Ipatinga",
            "Sete Lagoas", "Divinópolis", "Santa Luzia", "Ibirité", "Poços de Caldas",
            "Patos de Minas", "Pouso Alegre", "Teófilo Otoni", "Barbacena", "Sabará",
            "Varginha", "Conselheiro Lafaiete", "Araguari", "Itabira", "Passos",
        )),
        Region("BA", "Bahia", (
            "Salvador", "Feira de Santana", "Vitória da Conquista", "Camaçari", "Itabuna",
            "Juazeiro", "Lauro de Freitas", "Ilhéus", "Jequié", "Teixeira de Freitas",
            "Barreiras", "Alagoinhas", "Porto Seguro", "Simões Filho", "Paulo Afonso",
            "Eunápolis", "Santo Antônio de Jesus", "Valença", "Candeias", "Guanambi",
        )),
        Region("PR", "Paraná", (
            "Curitiba", "Londrina", "Maringá", "Ponta Grossa", "Cascavel",
            "São José dos Pinhais", "Foz do Iguaçu", "Colombo", "Guarapuava", "Paranaguá",
            "Araucária", "Toledo", "Apucarana", "Pinhais", "Campo Largo",
            "Almirante Tamandaré", "Umuarama", "Piraquara", "Cambé", "Arapongas",
        )),
        Region("RS", "Rio Grande do Sul", (
            "Porto Alegre", "Caxias do Sul", "Pelotas", "Canoas", "Santa Maria",
            "Gravataí", "Viamão", "Novo Hamburgo", "São Leopoldo", "Rio Grande",
            "Alvorada", "Passo Fundo", "Sapucaia do Sul", "Uruguaiana", "Santa Cruz do Sul",
            "Cachoeirinha", "Bagé", "Bento Gonçalves", "Erechim", "Guaíba",
        )),
        Region("PE", "Pernambuco", (
            "Recife", "Jaboatão dos Guararapes", "Olinda", "Caruaru", "Petrolina",
            "Paulista", "Cabo de Santo Agostinho", "Camaragibe", "Garanhuns", "Vitória de Santo Antão",
            "Igarassu", "São Lourenço da Mata", "Abreu e Lima", "Serra Talhada", "Araripina",
        )),
        Region("CE", "Ceará", (
            "Fortaleza", "Caucaia", "Juazeiro do Norte", "Maracanaú", "Sobral",
            "Crato", "Itapipoca", "Maranguape", "Iguatu", "Quixadá",
            "Pacatuba", "Aquiraz", "Canindé", "Crateús", "Pacajus",
        )),
        Region("PA", "Pará", (
            "Belém", "Ananindeua", "Santarém", "Marabá", "Parauapebas",
            "Castanhal", "Abaetetuba", "Cametá", "Marituba", "Bragança",
            "Tucuruí", "Altamira", "Itaituba", "Barcarena", "Paragominas",
        )),
        Region("AM", "Amazonas", (
            "Manaus", "Parintins", "Itacoatiara", "Manacapuru", "Coari",
            "Tefé", "Tabatinga", "Maués", "Humaitá", "Iranduba",
        )),
        Region("SC", "Santa Catarina", (
            "Joinville", "Florianópolis", "Blumenau", "São José", "Chapecó",
            "Itajaí", "Criciúma", "Jaraguá do Sul", "Palhoça", "Lages",
            "Balneário Camboriú", "Brusque", "Tubarão", "São Bento do Sul", "Caçador",
        )),
        Region("MA", "Maranhão", (
            "São Luís", "Imperatriz", "São José de Ribamar", "Timon", "Caxias",
            "Codó", "Paço do Lumiar", "Açailândia", "Bacabal", "Santa Inês",
        )),
        Region("PB", "Paraíba", (
            "João Pessoa", "Campina Grande", "Santa Rita", "Patos", "Bayeux",
            "Sousa", "Cajazeiras", "Cabedelo", "Guarabira", "Sapé",
        )),
        Region("MT", "Mato Grosso", (
            "Cuiabá", "Várzea Grande", "Rondonópolis", "Sinop", "Tangará da Serra",
            "Cáceres", "Sorriso", "Lucas do Rio Verde", "Primavera do Leste", "Barra do Garças",
        )),
        Region("MS", "Mato Grosso do Sul", (
            "Campo Grande", "Dourados", "Três Lagoas", "Corumbá", "Ponta Porã",
            "Naviraí", "Nova Andradina", "Aquidauana", "Sidrolândia", "Paranaíba",
        )),
        Region("PI", "Piauí", (
            "Teresina", "Parnaíba", "Picos", "Piripiri", "Floriano",
            "Campo Maior", "Barras", "União", "Altos", "José de Freitas",
        )),
        Region("RN", "Rio Grande do Norte", (
            "Natal", "Mossoró", "Parnamirim", "São Gonçalo do Amarante", "Ceará-Mirim",
            "Macaíba", "Caicó", "Assu", "Currais Novos", "São José de Mipibu",
        )),
        Region("AL", "Alagoas", (
            "Maceió", "Arapiraca", "Rio Largo", "Palmeira dos Índios", "União dos Palmares",
            "Penedo", "São Miguel dos Campos", "Santana do Ipanema", "Delmiro Gouveia", "Coruripe",
        )),
        Region("SE", "Sergipe", (
            "Aracaju", "Nossa Senhora do Socorro", "Lagarto", "Itabaiana", "São Cristóvão",
            "Estância", "Tobias Barreto", "Itabaianinha", "Simão Dias", "Capela",
        )),
        Region("ES", "Espírito Santo", (
            "Vila Velha", "Serra", "Cariacica", "Vitória", "Cachoeiro de Itapemirim",
            "Linhares", "São Mateus", "Colatina", "Guarapari", "Aracruz",
        )),
        Region("RO", "Rondônia", (
            "Porto Velho", "Ji-Paraná", "Ariquemes", "Vilhena", "Cacoal",
            "Rolim de Moura", "Jaru", "Guajará-Mirim", "Ouro Preto do Oeste", "Pimenta Bueno",
        )),
        Region("TO", "Tocantins", (
            "Palmas", "Araguaína", "Gurupi", "Porto Nacional", "Paraíso do Tocantins",
            "Colinas do Tocantins", "Guaraí", "Tocantinópolis", "Dianópolis", "Miracema do Tocantins",
        )),
        Region("AC", "Acre", (
            "Rio Branco", "Cruzeiro do Sul", "Sena Madureira", "Tarauacá", "Feijó",
            "Brasileia", "Senador Guiomard", "Epitaciolândia", "Xapuri", "Plácido de Castro",
        )),
        Region("AP", "Amapá", (
            "Macapá", "Santana", "Laranjal do Jari", "Oiapoque", "Mazagão",
            "Porto Grande", "Pedra Branca do Amapari", "Tartarugalzinho", "Vitória do Jari", "Calçoene",
        )),
        Region("RR", "Roraima", (
            "Boa Vista", "Rorainópolis", "Caracaraí", "Alto Alegre", "Mucajaí",
            "Cantá", "Pacaraima", "Bonfim", "Normandia", "São João da Baliza",
        )),
        Region("DF", "Distrito Federal", (
            "Brasília", "Ceilândia", "Taguatinga", "Samambaia", "Plano Piloto",
            "Águas Claras", "Recanto das Emas", "Gama", "Guará", "Santa Maria",
        ), aliases=("brasilia",)),
    ),
)

UNITED_STATES = Country(
    code="US",
    name="USA",
    aliases=("us", "usa", "eua", "estados unidos", "united states", "united states of america"),
    regions=(
        Region("CA", "California", (
            "Los Angeles", "San Diego", "San Jose", "San Francisco", "Fresno",
            "Sacramento", "Long Beach", "Oakland", "Bakersfield", "Anaheim",
            "Santa Ana", "Riverside", "Stockton", "Irvine", "Chula Vista",
        )),
        Region("TX", "Texas", (
            "Houston", "San Antonio", "Dallas", "Austin", "Fort Worth",
            "El Paso", "Arlington", "Corpus Christi", "Plano", "Laredo",
            "Lubbock", "Garland", "Irving", "Amarillo", "Grand Prairie",
        )),
        Region("FL", "Florida", (
            "Jacksonville", "Miami", "Tampa", "Orlando", "St. Petersburg",
            "Hialeah", "Tallahassee", "Fort Lauderdale", "Port St. Lucie", "Cape Coral",
            "Pembroke Pines", "Hollywood", "Miramar", "Gainesville", "Coral Springs",
        )),
        Region("NY", "New York", (
            "New York", "Buffalo", "Rochester", "Yonkers", "Syracuse",
            "Albany", "New Rochelle", "Mount Vernon", "Schenectady", "Utica",
            "White Plains", "Hempstead", "Troy", "Niagara Falls", "Binghamton",
        )),
        Region("PA", "Pennsylvania", (
            "Philadelphia", "Pittsburgh", "Allentown", "Reading", "Scranton",
            "Bethlehem", "Lancaster", "Harrisburg", "Altoona", "Erie",
            "York", "Wilkes-Barre", "Chester", "Williamsport", "Easton",
        )),
    ),
)

COUNTRIES: Dict[str, Country] = {country.code: country for country in (BRAZIL, UNITED_STATES)}
