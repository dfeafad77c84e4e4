from enum import Enum
from typing import Dict, FrozenSet, Iterable, Iterator, List, NamedTuple, Optional, Tuple

from core.condicoes import EPSILON, Condicao, TipoMaquina
from core.erros import ErroEntrada

DEFAULT_MAX_STEPS = 10000
DEFAULT_MAX_CONFIGS = 100000


class ResultadoPasso(Enum):
    CONTINUA = "continua"
    ACEITO = "aceito"
    REJEITADO = "rejeitado"
    TRAVADO = "travado"


class EstadoCompilado:
    """
    Estado de uma máquina compilada. As transições são montadas pelo compilador
    e congeladas em uma tupla; depois disso o estado não muda mais.
    """
    __slots__ = ("label", "initial", "final", "transitions")

    def __init__(self, label: str, initial: bool = False, final: bool = False):
        self.label = label
        self.initial = initial
        self.final = final
        self.transitions = []

    def _congelar(self):
        self.transitions = tuple(self.transitions)

    def __repr__(self):
        return f"EstadoCompilado({self.label!r})"


class TransicaoCompilada(NamedTuple):
    src: EstadoCompilado
    dst: EstadoCompilado
    conditions: Tuple[Condicao, ...]


class Execucao:
    """
    Linhas do tempo de uma execução não determinística.

    Cada linha é uma configuração imutável. A cada passo, a primeira
    configuração sucessora ocupa o lugar da linha original e as demais vão
    para o fim da lista. Uma configuração já visitada nesta execução não é
    explorada de novo, o que limita laços de ε.
    """
    def __init__(self, maquina: "MaquinaCompilada", entrada: str, iniciais: Iterable):
        self.maquina = maquina
        self.entrada = entrada
        self.resultado = ResultadoPasso.CONTINUA
        self.passos = 0
        self.ultima = None
        self._visitados = set()
        self.linhas: List = self._admitir(iniciais)

    def _admitir(self, configs: Iterable) -> List:
        novas = []
        for config in configs:
            if config not in self._visitados:
                self._visitados.add(config)
                novas.append(config)
        return novas

    def _aceita(self, config) -> bool:
        raise NotImplementedError

    def _movimentos(self, config) -> Iterator:
        raise NotImplementedError

    def advance(self) -> ResultadoPasso:
        if self.resultado is not ResultadoPasso.CONTINUA:
            return self.resultado

        self.passos += 1
        proximas, extras = [], []
        for config in self.linhas:
            self.ultima = config
            if self._aceita(config):
                self.linhas = [config]
                self.resultado = ResultadoPasso.ACEITO
                return self.resultado

            movimentos = self._admitir(self._movimentos(config))
            if movimentos:
                proximas.append(movimentos[0])
                extras.extend(movimentos[1:])

        self.linhas = proximas + extras
        if not self.linhas:
            self.resultado = ResultadoPasso.REJEITADO
        return self.resultado

    @property
    def configuracoes(self) -> int:
        """Quantidade de configurações distintas já exploradas."""
        return len(self._visitados)

    def travar(self) -> ResultadoPasso:
        self.resultado = ResultadoPasso.TRAVADO
        return self.resultado

    def snapshot(self) -> List[Tuple]:
        return [(config[0].label,) + tuple(config[1:]) for config in self.linhas]

    def extra(self) -> Dict[str, List[str]]:
        return {}


class ExecucaoFinita(Execucao):
    """Linhas (estado, cursor) de um AFD/AFN."""
    def __init__(self, maquina, entrada: str):
        super().__init__(maquina, entrada, ((s, 0) for s in maquina.initial_states))

    def _aceita(self, config) -> bool:
        estado, cursor = config
        return cursor >= len(self.entrada) and estado.final

    def _movimentos(self, config):
        estado, cursor = config
        caractere = self.entrada[cursor] if cursor < len(self.entrada) else None
        for transicao in estado.transitions:
            if EPSILON in transicao.conditions:
                yield transicao.dst, cursor
            if caractere is not None and caractere in transicao.conditions:
                yield transicao.dst, cursor + 1


class MaquinaCompilada:
    """Base das máquinas compiladas; imutável depois de construída."""
    tipo: TipoMaquina = None

    def __init__(self, states: Iterable[EstadoCompilado], final: Iterable[EstadoCompilado],
                 alphabet: Iterable[str]):
        self.states: Tuple[EstadoCompilado, ...] = tuple(states)
        self.final: FrozenSet[EstadoCompilado] = frozenset(final)
        self.alphabet: FrozenSet[str] = frozenset(alphabet)

    @property
    def initial_states(self) -> Tuple[EstadoCompilado, ...]:
        raise NotImplementedError

    def state(self, label: str) -> Optional[EstadoCompilado]:
        return next((s for s in self.states if s.label == label), None)

    def check_input(self, input_str: str):
        """Falha antes de simular se a entrada usa caracteres fora do alfabeto."""
        for caractere in input_str:
            if caractere not in self.alphabet:
                raise ErroEntrada(caractere)

    def start(self, input_str: str) -> Execucao:
        raise NotImplementedError

    def exhausted(self, execucao: Execucao, max_steps: int = DEFAULT_MAX_STEPS,
                  max_configs: int = DEFAULT_MAX_CONFIGS) -> bool:
        """Verdadeiro quando a execução passou de algum dos limites."""
        return execucao.passos >= max_steps or execucao.configuracoes > max_configs

    def simulate_history(self, input_str: str, max_steps: int = DEFAULT_MAX_STEPS,
                         max_configs: int = DEFAULT_MAX_CONFIGS):
        """
        Executa do zero até aceitar, rejeitar ou estourar um dos limites
        (passos ou configurações exploradas).
        Retorna (histórico de snapshots, resultado, execução).
        """
        execucao = self.start(input_str)
        history = [execucao.snapshot()]
        while execucao.resultado is ResultadoPasso.CONTINUA:
            if self.exhausted(execucao, max_steps, max_configs):
                return history, execucao.travar(), execucao
            execucao.advance()
            history.append(execucao.snapshot())
        return history, execucao.resultado, execucao

    def simulate(self, input_str: str) -> bool:
        """Simulação simples sem histórico."""
        _, resultado, _ = self.simulate_history(input_str)
        return resultado is ResultadoPasso.ACEITO


class _MaquinaFinita(MaquinaCompilada):
    def start(self, input_str: str) -> ExecucaoFinita:
        return ExecucaoFinita(self, input_str)

    def exhausted(self, execucao, max_steps=DEFAULT_MAX_STEPS, max_configs=DEFAULT_MAX_CONFIGS) -> bool:
        # No máximo len(states) * (len(entrada) + 1) configurações; sempre termina.
        return False


class AFD(_MaquinaFinita):
    tipo = TipoMaquina.DFA

    def __init__(self, states, initial: EstadoCompilado, final, alphabet):
        super().__init__(states, final, alphabet)
        self.initial = initial

    @property
    def initial_states(self):
        return (self.initial,)


class AFN(_MaquinaFinita):
    tipo = TipoMaquina.NFA

    def __init__(self, states, initial: Iterable[EstadoCompilado], final, alphabet):
        super().__init__(states, final, alphabet)
        self.initial: Tuple[EstadoCompilado, ...] = tuple(initial)

    @property
    def initial_states(self):
        return self.initial
