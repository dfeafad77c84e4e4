import logging
from typing import Dict, FrozenSet, Iterable, List, NamedTuple, Optional, Tuple

from core.condicoes import (
    BLANK_SYMBOL,
    EPSILON,
    CondicaoPilha,
    CondicaoTuring,
    TipoMaquina,
    parse_condition,
)
from core.erros import ErroCondicao, ErroValidacaoMaquina
from core.grafo import Grafo, NoGrafo, TransicaoGrafo

logger = logging.getLogger(__name__)

ACCEPT_LABEL = "accept"
REJECT_LABEL = "reject"


class Alfabetos(NamedTuple):
    """Alfabetos explícitos (fechados) ou None para inferir (abertos)."""
    alphabet: Optional[FrozenSet[str]] = None
    stack_alphabet: Optional[FrozenSet[str]] = None
    tape_alphabet: Optional[FrozenSet[str]] = None


class OpcoesValidacao(NamedTuple):
    require_all_transitions: bool = False


class _Alfabeto:
    """
    Conjunto ordenado por ordem de descoberta. Fechado quando o usuário
    forneceu os símbolos; aberto (inferido) caso contrário.
    `implicitos` são sempre aceitos e nunca exigidos; `ignorados` nunca entram
    no conjunto inferido.
    """
    def __init__(self, explicito: Optional[Iterable[str]], descricao: str,
                 implicitos=frozenset({EPSILON}), ignorados=frozenset({EPSILON})):
        self.fechado = explicito is not None
        self.descricao = descricao
        self.implicitos = implicitos
        self.ignorados = ignorados
        if explicito is None:
            self.simbolos: Dict[str, None] = {}
        elif isinstance(explicito, (set, frozenset)):
            self.simbolos = dict.fromkeys(sorted(explicito))
        else:
            self.simbolos = dict.fromkeys(explicito)

    def registrar(self, tipo: TipoMaquina, simbolo: str, transicao: TransicaoGrafo):
        if self.fechado:
            if simbolo not in self.simbolos and simbolo not in self.implicitos:
                raise ErroCondicao(tipo, simbolo, transicao, f"não encontrado no {self.descricao}")
        elif simbolo not in self.ignorados:
            self.simbolos[simbolo] = None

    def ordem(self) -> List[str]:
        return list(self.simbolos)

    def congelar(self) -> FrozenSet[str]:
        return frozenset(self.simbolos)


def _checar_inicio(grafo: Grafo, tipo: TipoMaquina):
    iniciais = [n for n in grafo.nodes if n.is_start]

    if tipo is TipoMaquina.NFA:
        return
    if tipo is TipoMaquina.DFA and len(iniciais) > 1:
        raise ErroValidacaoMaquina(
            tipo, f"'{iniciais[0].label}' e '{iniciais[1].label}' estão ambos marcados como estados iniciais.")
    if tipo is TipoMaquina.TURING and len(iniciais) > 1:
        raise ErroValidacaoMaquina(tipo, "múltiplos estados iniciais.")
    if not iniciais:
        raise ErroValidacaoMaquina(tipo, "nenhum estado inicial.")


def terminal_states(grafo: Grafo, tipo=TipoMaquina.TURING) -> Tuple[NoGrafo, NoGrafo]:
    """Localiza os estados 'accept' e 'reject' exigidos pela Máquina de Turing."""
    aceita = rejeita = None
    for node in grafo.nodes:
        if not node.is_final:
            continue
        if node.label == ACCEPT_LABEL:
            if aceita is not None:
                raise ErroValidacaoMaquina(tipo, "múltiplos estados de aceitação.")
            aceita = node
        elif node.label == REJECT_LABEL:
            if rejeita is not None:
                raise ErroValidacaoMaquina(tipo, "múltiplos estados de rejeição.")
            rejeita = node
        else:
            raise ErroValidacaoMaquina(
                tipo, "um estado final deve ser 'accept' ou 'reject' (verifique os rótulos).")

    if aceita is None:
        raise ErroValidacaoMaquina(tipo, "nenhum estado de aceitação.")
    if rejeita is None:
        raise ErroValidacaoMaquina(tipo, "nenhum estado de rejeição.")
    return aceita, rejeita


def _alfabetos_do_tipo(tipo: TipoMaquina, alfabetos: Alfabetos):
    reservados = {EPSILON, BLANK_SYMBOL} if tipo is TipoMaquina.TURING else {EPSILON}
    entrada = _Alfabeto(alfabetos.alphabet, "alfabeto",
                        implicitos=frozenset(reservados), ignorados=frozenset(reservados))
    pilha = _Alfabeto(alfabetos.stack_alphabet, "alfabeto da pilha")
    fita = _Alfabeto(alfabetos.tape_alphabet, "alfabeto da fita",
                     implicitos=frozenset({BLANK_SYMBOL}), ignorados=frozenset())
    return entrada, pilha, fita


def _registrar(tipo, condicao, transicao, entrada, pilha, fita):
    if isinstance(condicao, CondicaoPilha):
        entrada.registrar(tipo, condicao.symbol, transicao)
        pilha.registrar(tipo, condicao.read_stack_symbol, transicao)
        pilha.registrar(tipo, condicao.action_stack_symbol, transicao)
    elif isinstance(condicao, CondicaoTuring):
        # Símbolos lidos na fita podem ter sido escritos pela própria máquina,
        # então só o alfabeto inferido os recebe.
        if not entrada.fechado:
            entrada.registrar(tipo, condicao.read_symbol, transicao)
        fita.registrar(tipo, condicao.read_symbol, transicao)
        fita.registrar(tipo, condicao.write_symbol, transicao)
    else:
        if condicao != EPSILON:
            entrada.registrar(tipo, condicao, transicao)


def _reivindicacao(condicao):
    """(chave de duplicidade, símbolo de totalidade) de uma condição; None para ε."""
    if isinstance(condicao, CondicaoPilha):
        if condicao.symbol == EPSILON:
            return None
        return (condicao.symbol, condicao.read_stack_symbol), condicao.symbol
    if isinstance(condicao, CondicaoTuring):
        return condicao.read_symbol, condicao.read_symbol
    if condicao == EPSILON:
        return None
    return condicao, condicao


def _mensagem_duplicada(chave) -> str:
    if isinstance(chave, tuple):
        return f"para o símbolo '{chave[0]}' com topo de pilha '{chave[1]}'"
    return f"para o símbolo '{chave}'"


def _checar_cobertura(tipo, saidas, universo: List[str]):
    for node, lista in saidas.items():
        reivindicadas = set()
        cobertos = set()
        for transicao, condicao in lista:
            par = _reivindicacao(condicao)
            if par is None:
                continue
            chave, simbolo = par
            if chave in reivindicadas:
                raise ErroValidacaoMaquina(
                    tipo, f"O estado '{node.label}' tem mais de uma transição de saída {_mensagem_duplicada(chave)}.")
            reivindicadas.add(chave)
            cobertos.add(simbolo)

        faltando = [s for s in universo if s not in cobertos]
        if faltando:
            simbolos = ", ".join(f"'{s}'" for s in faltando)
            raise ErroValidacaoMaquina(
                tipo, f"O estado '{node.label}' não tem transições de saída para os símbolos {simbolos}.")


def validate(grafo: Grafo, tipo: TipoMaquina, alfabetos: Optional[Alfabetos] = None,
             opcoes: Optional[OpcoesValidacao] = None) -> Alfabetos:
    """
    Verifica se o grafo representa legalmente uma máquina do tipo pedido.

    Nunca altera o grafo: todo o estado auxiliar (alfabetos inferidos, símbolos
    reivindicados por estado) é local a esta chamada. Retorna os alfabetos
    resolvidos, ou seja, os explícitos ecoados e os inferidos preenchidos.
    """
    if tipo is TipoMaquina.AUTO:
        raise ValueError("O modo automático deve ser resolvido antes da validação.")
    alfabetos = alfabetos or Alfabetos()
    opcoes = opcoes or OpcoesValidacao()
    logger.debug("Validando grafo (%d estados) como %s", len(grafo.nodes), tipo.value)

    _checar_inicio(grafo, tipo)
    if tipo is TipoMaquina.TURING:
        terminal_states(grafo, tipo)

    entrada, pilha, fita = _alfabetos_do_tipo(tipo, alfabetos)

    saidas: Dict[NoGrafo, List] = {}
    for transicao in grafo.transitions:
        lista = saidas.setdefault(transicao.src, [])
        for bruta in transicao.conditions:
            condicao = parse_condition(tipo, bruta, transicao)
            _registrar(tipo, condicao, transicao, entrada, pilha, fita)
            lista.append((transicao, condicao))

    if tipo is TipoMaquina.TURING:
        universo = fita.ordem()
    else:
        universo = entrada.ordem()
    if tipo is TipoMaquina.DFA or opcoes.require_all_transitions:
        _checar_cobertura(tipo, saidas, universo)

    return Alfabetos(
        alphabet=entrada.congelar(),
        stack_alphabet=pilha.congelar() if tipo is TipoMaquina.PDA else None,
        tape_alphabet=fita.congelar() if tipo is TipoMaquina.TURING else None,
    )
