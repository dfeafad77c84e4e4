import logging
from enum import Enum
from typing import Dict, Iterable, List, NamedTuple, Optional

from core.automato import DEFAULT_MAX_CONFIGS, DEFAULT_MAX_STEPS, Execucao, ResultadoPasso
from core.compilador import Maquina
from core.condicoes import TipoMaquina
from core.erros import ErroSemMaquina
from core.grafo import Grafo
from core.inferencia import compilar
from core.validador import Alfabetos, OpcoesValidacao

logger = logging.getLogger(__name__)


class EstadoSimulador(Enum):
    OCIOSO = "ocioso"
    CARREGADO = "carregado"
    SIMULANDO = "simulando"


class ResultadoAvaliacao(NamedTuple):
    result: bool
    extra: Dict[str, List[str]]
    status: ResultadoPasso


class CasoTeste(NamedTuple):
    input: str
    expected: bool


class ResultadoCaso(NamedTuple):
    matched: bool
    result: bool
    extra: Dict[str, List[str]]


class Simulador:
    """
    Mantém a máquina ativa e a execução passo a passo.

    Ocioso (sem máquina) -> Carregado (máquina compilada) -> Simulando
    (linhas do tempo ativas). `reset_simulation` volta a Carregado e
    `end_simulation` volta a Ocioso. Uma nova compilação substitui a máquina
    inteira e descarta a simulação em andamento.
    """
    def __init__(self, max_passos: int = DEFAULT_MAX_STEPS, max_configuracoes: int = DEFAULT_MAX_CONFIGS):
        self.max_passos = max_passos
        self.max_configuracoes = max_configuracoes
        self.maquina: Optional[Maquina] = None
        self.execucao: Optional[Execucao] = None
        self.historico: List[list] = []

    @property
    def estado(self) -> EstadoSimulador:
        if self.maquina is None:
            return EstadoSimulador.OCIOSO
        if self.execucao is None:
            return EstadoSimulador.CARREGADO
        return EstadoSimulador.SIMULANDO

    @property
    def timelines(self) -> list:
        return self.execucao.snapshot() if self.execucao else []

    def compile(self, grafo: Grafo, tipo: TipoMaquina, alfabetos: Optional[Alfabetos] = None,
                opcoes: Optional[OpcoesValidacao] = None) -> Maquina:
        """Compila (Auto incluso) e carrega o resultado; em caso de falha nada muda."""
        maquina = compilar(grafo, tipo, alfabetos, opcoes)
        self.load(maquina)
        return maquina

    def load(self, maquina: Maquina):
        self.maquina = maquina
        self.reset_simulation()

    def _exigir_maquina(self) -> Maquina:
        if self.maquina is None:
            raise ErroSemMaquina()
        return self.maquina

    def simulate(self, input_str: str):
        maquina = self._exigir_maquina()
        maquina.check_input(input_str)
        self.execucao = maquina.start(input_str)
        self.historico = [self.execucao.snapshot()]

    def advance(self) -> ResultadoPasso:
        """Um passo síncrono sobre todas as linhas do tempo vivas."""
        maquina = self._exigir_maquina()
        if self.execucao is None:
            raise RuntimeError("Nenhuma simulação em andamento.")
        if (self.execucao.resultado is ResultadoPasso.CONTINUA
                and maquina.exhausted(self.execucao, self.max_passos, self.max_configuracoes)):
            resultado = self.execucao.travar()
        else:
            resultado = self.execucao.advance()
        self.historico.append(self.execucao.snapshot())
        return resultado

    def extra(self) -> Dict[str, List[str]]:
        return self.execucao.extra() if self.execucao else {}

    def eval(self, input_str: str) -> ResultadoAvaliacao:
        """
        Decide a aceitação do zero, sem tocar na simulação interativa.
        Caracteres fora do alfabeto falham antes de qualquer passo.
        """
        maquina = self._exigir_maquina()
        maquina.check_input(input_str)

        _, resultado, execucao = maquina.simulate_history(input_str, self.max_passos, self.max_configuracoes)
        if resultado is ResultadoPasso.TRAVADO:
            logger.warning("Limite de execução atingido avaliando '%s' (%d passos, %d configurações); "
                           "entrada rejeitada.", input_str, execucao.passos, execucao.configuracoes)
        return ResultadoAvaliacao(resultado is ResultadoPasso.ACEITO, execucao.extra(), resultado)

    def run_tests(self, casos: Iterable[CasoTeste]) -> List[ResultadoCaso]:
        resultados = []
        for caso in casos:
            avaliacao = self.eval(caso.input)
            resultados.append(ResultadoCaso(avaliacao.result == caso.expected, avaliacao.result, avaliacao.extra))
        return resultados

    def reset_simulation(self):
        self.execucao = None
        self.historico = []

    def end_simulation(self):
        self.maquina = None
        self.reset_simulation()
