import logging
from typing import Dict, Optional, Union

from core.automato import AFD, AFN, EstadoCompilado, TransicaoCompilada
from core.condicoes import (
    BLANK_SYMBOL,
    EPSILON,
    CondicaoPilha,
    CondicaoTuring,
    TipoMaquina,
    parse_condition,
)
from core.erros import ErroSimbolo
from core.grafo import Grafo, NoGrafo
from core.maquina_turing import MaquinaTuring
from core.pilha import AutomatoPilha
from core.validador import Alfabetos, OpcoesValidacao, terminal_states, validate

logger = logging.getLogger(__name__)

Maquina = Union[AFD, AFN, AutomatoPilha, MaquinaTuring]


def _conferir(tipo, simbolo, alfabeto, transicao, descricao, livres=(EPSILON,)):
    if alfabeto is not None and simbolo not in alfabeto and simbolo not in livres:
        raise ErroSimbolo(tipo, simbolo, transicao, f"não reconhecido no {descricao}")


def _compilar_condicao(tipo: TipoMaquina, bruta: str, transicao, alfabetos: Alfabetos):
    """Lê a condição com a mesma gramática do validador e reconfere os alfabetos explícitos."""
    condicao = parse_condition(tipo, bruta, transicao)

    if isinstance(condicao, CondicaoPilha):
        _conferir(tipo, condicao.symbol, alfabetos.alphabet, transicao, "alfabeto")
        _conferir(tipo, condicao.read_stack_symbol, alfabetos.stack_alphabet, transicao, "alfabeto da pilha")
        _conferir(tipo, condicao.action_stack_symbol, alfabetos.stack_alphabet, transicao, "alfabeto da pilha")
    elif isinstance(condicao, CondicaoTuring):
        _conferir(tipo, condicao.read_symbol, alfabetos.tape_alphabet, transicao, "alfabeto da fita", (BLANK_SYMBOL,))
        _conferir(tipo, condicao.write_symbol, alfabetos.tape_alphabet, transicao, "alfabeto da fita", (BLANK_SYMBOL,))
    else:
        _conferir(tipo, condicao, alfabetos.alphabet, transicao, "alfabeto")
    return condicao


def compile(grafo: Grafo, tipo: TipoMaquina, alfabetos: Optional[Alfabetos] = None,
            opcoes: Optional[OpcoesValidacao] = None) -> Maquina:
    """
    Valida e compila o grafo como o tipo pedido, em uma única operação.

    A ordem dos estados e das transições de saída de cada estado segue a ordem
    de criação no grafo; é ela que define a ordem dos ramos na simulação.
    O grafo não é alterado.
    """
    if tipo is TipoMaquina.AUTO:
        raise ValueError("Use core.inferencia.compilar para o modo automático.")

    alfabetos = alfabetos or Alfabetos()
    resolvidos = validate(grafo, tipo, alfabetos, opcoes)

    estados: Dict[NoGrafo, EstadoCompilado] = {}
    for node in grafo.nodes:
        estados[node] = EstadoCompilado(node.label, initial=node.is_start, final=node.is_final)

    for transicao in grafo.transitions:
        src, dst = estados[transicao.src], estados[transicao.dst]
        conditions = tuple(_compilar_condicao(tipo, c, transicao, alfabetos) for c in transicao.conditions)
        src.transitions.append(TransicaoCompilada(src, dst, conditions))

    for estado in estados.values():
        estado._congelar()

    states = list(estados.values())
    iniciais = [s for s in states if s.initial]
    finais = [s for s in states if s.final]

    if tipo is TipoMaquina.DFA:
        maquina = AFD(states, iniciais[0], finais, resolvidos.alphabet)
    elif tipo is TipoMaquina.NFA:
        maquina = AFN(states, iniciais, finais, resolvidos.alphabet)
    elif tipo is TipoMaquina.PDA:
        maquina = AutomatoPilha(states, iniciais, finais, resolvidos.alphabet, resolvidos.stack_alphabet)
    elif tipo is TipoMaquina.TURING:
        aceita, rejeita = terminal_states(grafo, tipo)
        maquina = MaquinaTuring(states, iniciais[0], estados[aceita], estados[rejeita],
                                resolvidos.alphabet, resolvidos.tape_alphabet)
    else:
        raise ValueError(f"Tipo de máquina desconhecido: {tipo}")

    logger.debug("Compilado como %s: %d estados, alfabeto %s",
                 tipo.value, len(states), sorted(maquina.alphabet))
    return maquina
