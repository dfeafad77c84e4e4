import logging
from typing import Dict, Optional

from core.compilador import Maquina, compile
from core.condicoes import TipoMaquina
from core.erros import ErroInferencia, ErroValidacaoMaquina
from core.grafo import Grafo
from core.validador import Alfabetos, OpcoesValidacao, validate

logger = logging.getLogger(__name__)

# TM e PDA têm exigências estruturais próprias (rótulos accept/reject,
# gramáticas de condição); vêm antes para não virarem AFD por acaso.
ORDEM_AUTO = (TipoMaquina.TURING, TipoMaquina.PDA, TipoMaquina.DFA, TipoMaquina.NFA)


def _tentar(acao, tipo):
    if tipo is not TipoMaquina.AUTO:
        return tipo, acao(tipo)

    tentativas: Dict[TipoMaquina, str] = {}
    for candidato in ORDEM_AUTO:
        try:
            resultado = acao(candidato)
        except ErroValidacaoMaquina as e:
            tentativas[candidato] = str(e)
            logger.debug("Auto: %s descartado: %s", candidato.value, e)
            continue
        logger.info("Auto: grafo reconhecido como %s", candidato.value)
        return candidato, resultado
    raise ErroInferencia(tentativas)


def compilar(grafo: Grafo, tipo: TipoMaquina, alfabetos: Optional[Alfabetos] = None,
             opcoes: Optional[OpcoesValidacao] = None) -> Maquina:
    """
    Compila como o tipo pedido; em modo automático tenta TM, PDA, AFD e AFN,
    nessa ordem, e devolve a primeira compilação bem-sucedida.
    """
    _, maquina = _tentar(lambda t: compile(grafo, t, alfabetos, opcoes), tipo)
    return maquina


def determinar_tipo(grafo: Grafo, tipo: TipoMaquina, alfabetos: Optional[Alfabetos] = None,
                    opcoes: Optional[OpcoesValidacao] = None) -> TipoMaquina:
    """Resolve o tipo (inclusive Auto) apenas validando, sem compilar."""
    resolvido, _ = _tentar(lambda t: validate(grafo, t, alfabetos, opcoes), tipo)
    return resolvido
