from typing import Dict, Iterable, List, Optional, Tuple

from core.automato import EstadoCompilado, Execucao, MaquinaCompilada
from core.condicoes import EPSILON, AcaoPilha, CondicaoPilha, TipoMaquina


def apply_stack_action(condicao: CondicaoPilha, pilha: Tuple[str, ...]) -> Optional[Tuple[str, ...]]:
    """
    Aplica a ação da condição sobre a pilha (topo no fim da tupla).
    Retorna None quando o desempilhamento não é possível.
    """
    simbolo = condicao.action_stack_symbol
    if condicao.action is AcaoPilha.PUSH:
        return pilha if simbolo == EPSILON else pilha + (simbolo,)

    if not pilha:
        return None
    if simbolo != EPSILON and pilha[-1] != simbolo:
        return None
    return pilha[:-1]


class ExecucaoPilha(Execucao):
    """
    Linhas (estado, cursor, pilha). Cada linha carrega a própria pilha, então
    ramos diferentes nunca compartilham empilhamentos.

    Empilhamentos por ε geram pilhas sempre novas, então o conjunto de
    visitados sozinho não limita a busca; quem limita é `exhausted`, pelo
    número de configurações exploradas.
    """
    def __init__(self, maquina: "AutomatoPilha", entrada: str):
        super().__init__(maquina, entrada, ((s, 0, ()) for s in maquina.initial_states))

    def _aceita(self, config) -> bool:
        estado, cursor, _ = config
        return cursor >= len(self.entrada) and estado.final

    def _movimentos(self, config):
        estado, cursor, pilha = config
        caractere = self.entrada[cursor] if cursor < len(self.entrada) else None
        topo = pilha[-1] if pilha else None

        for transicao in estado.transitions:
            for condicao in transicao.conditions:
                if condicao.symbol == EPSILON:
                    consumo = 0
                elif condicao.symbol == caractere:
                    consumo = 1
                else:
                    continue

                if condicao.read_stack_symbol != EPSILON and condicao.read_stack_symbol != topo:
                    continue

                nova_pilha = apply_stack_action(condicao, pilha)
                if nova_pilha is None:
                    continue
                yield transicao.dst, cursor + consumo, nova_pilha

    def extra(self) -> Dict[str, List[str]]:
        config = self.linhas[0] if self.linhas else self.ultima
        return {"stack": list(config[2]) if config else []}


class AutomatoPilha(MaquinaCompilada):
    """
    Autômato de Pilha compilado (Pushdown Automaton - PDA).
    Aceita por estado final com a entrada inteiramente consumida; a pilha
    começa vazia.
    """
    tipo = TipoMaquina.PDA

    def __init__(self, states, initial: Iterable[EstadoCompilado], final, alphabet, stack_alphabet):
        super().__init__(states, final, alphabet)
        self.initial: Tuple[EstadoCompilado, ...] = tuple(initial)
        self.stack_alphabet = frozenset(stack_alphabet)

    @property
    def initial_states(self):
        return self.initial

    def start(self, input_str: str) -> ExecucaoPilha:
        return ExecucaoPilha(self, input_str)
