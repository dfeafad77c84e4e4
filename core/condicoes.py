from enum import Enum
from typing import NamedTuple, Union

from core.erros import ErroCondicao, ErroSimbolo

EPSILON = "ε"
BLANK_SYMBOL = "β"


class TipoMaquina(Enum):
    DFA = "DFA"
    NFA = "NFA"
    PDA = "PDA"
    TURING = "Turing Machine"
    AUTO = "Auto"

    @classmethod
    def from_str(cls, texto: str) -> "TipoMaquina":
        """Aceita o nome ('PDA') ou o valor ('Turing Machine') do tipo."""
        for tipo in cls:
            if texto in (tipo.name, tipo.value):
                return tipo
        raise ValueError(f"Tipo de máquina desconhecido: '{texto}'.")


class AcaoPilha(Enum):
    PUSH = "Push"
    POP = "Pop"


class Movimento(Enum):
    NENHUM = "N"
    ESQUERDA = "L"
    DIREITA = "R"


ACOES_PILHA = {"P": AcaoPilha.PUSH, "Push": AcaoPilha.PUSH, "p": AcaoPilha.POP, "Pop": AcaoPilha.POP}
MOVIMENTOS = {m.value: m for m in Movimento}


class CondicaoPilha(NamedTuple):
    symbol: str
    read_stack_symbol: str
    action: AcaoPilha
    action_stack_symbol: str

    def __str__(self):
        acao = "P" if self.action is AcaoPilha.PUSH else "p"
        return f"{self.symbol} {self.read_stack_symbol} {acao} {self.action_stack_symbol}"


class CondicaoTuring(NamedTuple):
    read_symbol: str
    write_symbol: str
    movement: Movimento

    def __str__(self):
        return f"{self.read_symbol} {self.write_symbol} {self.movement.value}"


Condicao = Union[str, CondicaoPilha, CondicaoTuring]


def _checar_simbolo(tipo: TipoMaquina, simbolo: str, transicao):
    if len(simbolo) != 1:
        raise ErroSimbolo(tipo, simbolo, transicao, "deve ter exatamente um caractere")


def parse_fa_condition(tipo: TipoMaquina, condicao: str, transicao) -> str:
    _checar_simbolo(tipo, condicao, transicao)
    if condicao == EPSILON and tipo is TipoMaquina.DFA:
        raise ErroCondicao(tipo, condicao, transicao, "usa ε, que não é permitido em um AFD")
    return condicao


def parse_pda_condition(condicao: str, transicao) -> CondicaoPilha:
    """
    Lê '<símbolo> <topo> <ação> <símbolo da pilha>'.
    A ação é 'P' (Push) ou 'p' (Pop); as formas longas também são aceitas.
    """
    tipo = TipoMaquina.PDA
    partes = condicao.split(" ")
    if len(partes) != 4:
        raise ErroCondicao(tipo, condicao, transicao, "não pôde ser lida como condição de autômato de pilha")

    simbolo, topo, acao, simbolo_pilha = partes
    for s in (simbolo, topo, simbolo_pilha):
        _checar_simbolo(tipo, s, transicao)

    if acao not in ACOES_PILHA:
        raise ErroCondicao(tipo, condicao, transicao, f"tem ação de pilha '{acao}', que deve ser 'P' (Push) ou 'p' (Pop)")

    return CondicaoPilha(simbolo, topo, ACOES_PILHA[acao], simbolo_pilha)


def parse_tm_condition(condicao: str, transicao) -> CondicaoTuring:
    """Lê '<lido> <escrito> <movimento>' com movimento N, L ou R."""
    tipo = TipoMaquina.TURING
    partes = condicao.split(" ")
    if len(partes) != 3:
        raise ErroCondicao(tipo, condicao, transicao, "não pôde ser lida como condição de Máquina de Turing")

    lido, escrito, movimento = partes
    _checar_simbolo(tipo, lido, transicao)
    _checar_simbolo(tipo, escrito, transicao)

    if movimento not in MOVIMENTOS:
        raise ErroCondicao(tipo, condicao, transicao, f"tem movimento '{movimento}', que deve ser 'N', 'R' ou 'L'")

    return CondicaoTuring(lido, escrito, MOVIMENTOS[movimento])


def parse_condition(tipo: TipoMaquina, condicao: str, transicao) -> Condicao:
    """Ponto único de leitura usado pelo validador e pelo compilador."""
    if tipo in (TipoMaquina.DFA, TipoMaquina.NFA):
        return parse_fa_condition(tipo, condicao, transicao)
    if tipo is TipoMaquina.PDA:
        return parse_pda_condition(condicao, transicao)
    if tipo is TipoMaquina.TURING:
        return parse_tm_condition(condicao, transicao)
    raise ValueError(f"Tipo de máquina sem gramática de condição: {tipo}")

