from typing import Dict, List

from core.automato import EstadoCompilado, Execucao, MaquinaCompilada, ResultadoPasso
from core.condicoes import BLANK_SYMBOL, Movimento, TipoMaquina

DESLOCAMENTO = {Movimento.NENHUM: 0, Movimento.ESQUERDA: -1, Movimento.DIREITA: 1}


class ExecucaoTuring(Execucao):
    """
    Execução determinística: uma única linha (estado, cabeça) e uma fita
    esparsa, ilimitada nos dois sentidos. Células ausentes valem branco.
    """
    def __init__(self, maquina: "MaquinaTuring", entrada: str):
        super().__init__(maquina, entrada, [(maquina.initial, 0)])
        self.tape: Dict[int, str] = {i: symbol for i, symbol in enumerate(entrada)}

    def read(self, pos: int) -> str:
        return self.tape.get(pos, self.maquina.blank_symbol)

    def write(self, pos: int, symbol: str):
        if symbol == self.maquina.blank_symbol:
            self.tape.pop(pos, None)
        else:
            self.tape[pos] = symbol

    def advance(self) -> ResultadoPasso:
        if self.resultado is not ResultadoPasso.CONTINUA:
            return self.resultado

        self.passos += 1
        estado, head_pos = self.linhas[0]
        self.ultima = (estado, head_pos)

        if estado is self.maquina.accept:
            self.resultado = ResultadoPasso.ACEITO
            return self.resultado
        if estado is self.maquina.reject:
            self.resultado = ResultadoPasso.REJEITADO
            return self.resultado

        read_symbol = self.read(head_pos)
        for transicao in estado.transitions:
            for condicao in transicao.conditions:
                if condicao.read_symbol != read_symbol:
                    continue
                self.write(head_pos, condicao.write_symbol)
                self.linhas = [(transicao.dst, head_pos + DESLOCAMENTO[condicao.movement])]
                return self.resultado

        # Sem transição aplicável fora de accept: a máquina para rejeitando.
        self.resultado = ResultadoPasso.REJEITADO
        return self.resultado

    def tape_cells(self) -> List[str]:
        if not self.tape:
            return []
        inicio, fim = min(self.tape), max(self.tape)
        return [self.read(i) for i in range(inicio, fim + 1)]

    def snapshot(self):
        estado, head_pos = self.linhas[0]
        return [(estado.label, head_pos, "".join(self.tape_cells()))]

    def extra(self):
        return {"tape": self.tape_cells()}


class MaquinaTuring(MaquinaCompilada):
    """
    Máquina de Turing determinística compilada. Os estados finais são
    exatamente 'accept' e 'reject'.
    """
    tipo = TipoMaquina.TURING

    def __init__(self, states, initial: EstadoCompilado, accept: EstadoCompilado,
                 reject: EstadoCompilado, alphabet, tape_alphabet, blank_symbol: str = BLANK_SYMBOL):
        super().__init__(states, (accept, reject), alphabet)
        self.initial = initial
        self.accept = accept
        self.reject = reject
        self.tape_alphabet = frozenset(tape_alphabet)
        self.blank_symbol = blank_symbol

    @property
    def initial_states(self):
        return (self.initial,)

    def start(self, input_str: str) -> ExecucaoTuring:
        return ExecucaoTuring(self, input_str)
