from typing import Optional
from xml.sax.saxutils import escape, quoteattr

from core.condicoes import TipoMaquina
from core.grafo import Grafo
from core.inferencia import determinar_tipo
from core.validador import Alfabetos, OpcoesValidacao

TIPOS_JFLAP = {
    TipoMaquina.DFA: "fa",
    TipoMaquina.NFA: "fa",
    TipoMaquina.PDA: "pda",
    TipoMaquina.TURING: "turing",
}


def serialize_type(tipo: TipoMaquina) -> str:
    if tipo not in TIPOS_JFLAP:
        raise ValueError(f"Tipo sem correspondente no JFLAP: {tipo}")
    return TIPOS_JFLAP[tipo]


def export_jflap(grafo: Grafo, tipo: TipoMaquina, alfabetos: Optional[Alfabetos] = None,
                 opcoes: Optional[OpcoesValidacao] = None) -> str:
    """
    Gera o XML (.jff) do JFLAP 7.1. Cada condição vira uma transição própria
    com a condição inteira em <read>, indexada por (from, to).
    """
    tipo = determinar_tipo(grafo, tipo, alfabetos, opcoes)
    ids = {id(node): i for i, node in enumerate(grafo.nodes)}

    linhas = ['<?xml version="1.0" encoding="UTF-8" standalone="no"?><!--Created with JFLAP 7.1.--><structure>',
              f"\t<type>{serialize_type(tipo)}</type>",
              "\t<automaton>",
              "\t\t<!--The list of states.-->"]

    for node in grafo.nodes:
        x, y = node.position
        linhas.append(f'\t\t<state id="{ids[id(node)]}" name={quoteattr(node.label)}>')
        linhas.append(f"\t\t\t<x>{x}</x>")
        linhas.append(f"\t\t\t<y>{y}</y>")
        if node.is_start:
            linhas.append("\t\t\t<initial/>")
        if node.is_final:
            linhas.append("\t\t\t<final/>")
        linhas.append("\t\t</state>")

    for transicao in grafo.transitions:
        for condicao in transicao.conditions:
            linhas.append("\t\t<transition>")
            linhas.append(f"\t\t\t<from>{ids[id(transicao.src)]}</from>")
            linhas.append(f"\t\t\t<to>{ids[id(transicao.dst)]}</to>")
            linhas.append(f"\t\t\t<read>{escape(condicao)}</read>")
            linhas.append("\t\t</transition>")

    linhas.append("\t</automaton>")
    linhas.append("</structure>")
    return "\n".join(linhas)
