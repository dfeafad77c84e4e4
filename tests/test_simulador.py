import unittest

from core.automato import ResultadoPasso
from core.condicoes import TipoMaquina
from core.erros import ErroEntrada, ErroSemMaquina
from core.simulador import CasoTeste, EstadoSimulador, Simulador

from exemplos import (
    dfa_par_de_as,
    dfa_simples,
    nfa_laco_epsilon,
    nfa_ramificado,
    pda_anbn,
    pda_empilha_sem_fim,
    tm_em_laco,
    tm_so_as,
)


def carregado(grafo, tipo, **kwargs) -> Simulador:
    simulador = Simulador(**kwargs)
    simulador.compile(grafo, tipo)
    return simulador


class TestCicloDeVida(unittest.TestCase):
    def test_states(self):
        simulador = Simulador()
        self.assertIs(simulador.estado, EstadoSimulador.OCIOSO)

        simulador.compile(dfa_simples(), TipoMaquina.DFA)
        self.assertIs(simulador.estado, EstadoSimulador.CARREGADO)

        simulador.simulate("a")
        self.assertIs(simulador.estado, EstadoSimulador.SIMULANDO)

        simulador.reset_simulation()
        self.assertIs(simulador.estado, EstadoSimulador.CARREGADO)
        self.assertEqual(simulador.timelines, [])

        simulador.end_simulation()
        self.assertIs(simulador.estado, EstadoSimulador.OCIOSO)
        self.assertIsNone(simulador.maquina)

    def test_requires_machine(self):
        simulador = Simulador()
        with self.assertRaises(ErroSemMaquina):
            simulador.eval("a")
        with self.assertRaises(ErroSemMaquina):
            simulador.simulate("a")
        with self.assertRaises(ErroSemMaquina):
            simulador.advance()

    def test_advance_without_simulation(self):
        simulador = carregado(dfa_simples(), TipoMaquina.DFA)
        with self.assertRaises(RuntimeError):
            simulador.advance()

    def test_failed_compile_keeps_previous_machine(self):
        simulador = carregado(dfa_simples(), TipoMaquina.DFA)
        anterior = simulador.maquina
        with self.assertRaises(ValueError):
            simulador.compile(nfa_ramificado(), TipoMaquina.DFA)
        self.assertIs(simulador.maquina, anterior)

    def test_recompile_discards_simulation(self):
        simulador = carregado(dfa_simples(), TipoMaquina.DFA)
        simulador.simulate("a")
        simulador.compile(dfa_par_de_as(), TipoMaquina.DFA)
        self.assertIs(simulador.estado, EstadoSimulador.CARREGADO)
        self.assertEqual(simulador.historico, [])


class TestFinitos(unittest.TestCase):
    def test_dfa_eval(self):
        simulador = carregado(dfa_simples(), TipoMaquina.DFA)
        self.assertTrue(simulador.eval("a").result)
        self.assertFalse(simulador.eval("").result)
        self.assertEqual(simulador.eval("a").extra, {})
        with self.assertRaises(ErroEntrada) as ctx:
            simulador.eval("b")
        self.assertEqual(ctx.exception.caractere, "b")

    def test_dfa_even_as(self):
        simulador = carregado(dfa_par_de_as(), TipoMaquina.DFA)
        self.assertTrue(simulador.eval("aba").result)
        self.assertFalse(simulador.eval("ab").result)
        self.assertTrue(simulador.eval("").result)

    def test_nfa_branches_step_by_step(self):
        simulador = carregado(nfa_ramificado(), TipoMaquina.NFA)
        simulador.simulate("aa")
        self.assertEqual(simulador.timelines, [("q0", 0)])

        self.assertIs(simulador.advance(), ResultadoPasso.CONTINUA)
        self.assertEqual(simulador.timelines, [("q1", 1), ("q2", 0)])

        self.assertIs(simulador.advance(), ResultadoPasso.CONTINUA)
        self.assertEqual(simulador.timelines, [("q2", 1)])

        self.assertIs(simulador.advance(), ResultadoPasso.CONTINUA)
        self.assertEqual(simulador.timelines, [("q2", 2)])

        self.assertIs(simulador.advance(), ResultadoPasso.ACEITO)
        self.assertEqual(len(simulador.historico), 5)

    def test_nfa_eval(self):
        simulador = carregado(nfa_ramificado(), TipoMaquina.NFA)
        self.assertTrue(simulador.eval("").result)
        self.assertTrue(simulador.eval("a").result)

    def test_epsilon_loop_terminates(self):
        simulador = carregado(nfa_laco_epsilon(), TipoMaquina.NFA)
        avaliacao = simulador.eval("")
        self.assertFalse(avaliacao.result)
        self.assertIs(avaliacao.status, ResultadoPasso.REJEITADO)
        self.assertFalse(simulador.eval("aa").result)
        self.assertTrue(simulador.eval("a").result)

    def test_eval_does_not_touch_interactive_run(self):
        simulador = carregado(nfa_ramificado(), TipoMaquina.NFA)
        simulador.simulate("aa")
        simulador.advance()
        simulador.eval("a")
        self.assertEqual(simulador.timelines, [("q1", 1), ("q2", 0)])

    def test_result_is_sticky(self):
        simulador = carregado(dfa_simples(), TipoMaquina.DFA)
        simulador.simulate("")
        self.assertIs(simulador.advance(), ResultadoPasso.REJEITADO)
        self.assertIs(simulador.advance(), ResultadoPasso.REJEITADO)

    def test_long_input_is_not_cut_short(self):
        avaliacao = carregado(dfa_par_de_as(), TipoMaquina.DFA).eval("b" * 10000)
        self.assertTrue(avaliacao.result)
        self.assertIs(avaliacao.status, ResultadoPasso.ACEITO)

    def test_step_limit_does_not_apply_to_finite_automata(self):
        simulador = carregado(nfa_ramificado(), TipoMaquina.NFA, max_passos=5, max_configuracoes=5)
        self.assertTrue(simulador.eval("a" * 50).result)
        simulador.simulate("a" * 50)
        for _ in range(51):
            self.assertIs(simulador.advance(), ResultadoPasso.CONTINUA)
        self.assertIs(simulador.advance(), ResultadoPasso.ACEITO)


class TestPilha(unittest.TestCase):
    def setUp(self):
        self.simulador = carregado(pda_anbn(), TipoMaquina.PDA)

    def test_accepts_balanced(self):
        for entrada in ("", "ab", "aabb"):
            self.assertTrue(self.simulador.eval(entrada).result, entrada)

    def test_rejects_unbalanced(self):
        for entrada in ("aab", "abb", "ba"):
            self.assertFalse(self.simulador.eval(entrada).result, entrada)

    def test_stack_is_reported(self):
        self.assertEqual(self.simulador.eval("aabb").extra, {"stack": []})

    def test_stack_while_stepping(self):
        self.simulador.simulate("ab")
        self.simulador.advance()
        self.assertEqual(self.simulador.extra(), {"stack": ["Z"]})
        self.simulador.advance()
        self.assertEqual(self.simulador.extra(), {"stack": ["Z", "A"]})

    def test_long_balanced_input(self):
        self.assertTrue(self.simulador.eval("a" * 200 + "b" * 200).result)

    def test_epsilon_pushes_are_bounded(self):
        simulador = carregado(pda_empilha_sem_fim(), TipoMaquina.PDA, max_configuracoes=500)
        with self.assertLogs("core.simulador", level="WARNING"):
            avaliacao = simulador.eval("")
        self.assertFalse(avaliacao.result)
        self.assertIs(avaliacao.status, ResultadoPasso.TRAVADO)

    def test_epsilon_pushes_are_bounded_by_default(self):
        with self.assertLogs("core.simulador", level="WARNING"):
            avaliacao = carregado(pda_empilha_sem_fim(), TipoMaquina.PDA).eval("")
        self.assertIs(avaliacao.status, ResultadoPasso.TRAVADO)

    def test_epsilon_pushes_stop_while_stepping(self):
        simulador = carregado(pda_empilha_sem_fim(), TipoMaquina.PDA, max_configuracoes=50)
        simulador.simulate("")
        for _ in range(20):
            resultado = simulador.advance()
        self.assertIs(resultado, ResultadoPasso.TRAVADO)
        self.assertLessEqual(simulador.execucao.configuracoes, 200)


class TestTuring(unittest.TestCase):
    def test_accepts_only_as(self):
        simulador = carregado(tm_so_as(), TipoMaquina.TURING)
        avaliacao = simulador.eval("aa")
        self.assertTrue(avaliacao.result)
        self.assertEqual(avaliacao.extra, {"tape": ["X", "X"]})

        avaliacao = simulador.eval("ab")
        self.assertFalse(avaliacao.result)
        self.assertEqual(avaliacao.extra, {"tape": ["X", "b"]})

    def test_step_by_step(self):
        simulador = carregado(tm_so_as(), TipoMaquina.TURING)
        simulador.simulate("aa")
        self.assertEqual(simulador.timelines, [("q0", 0, "aa")])
        for _ in range(3):
            self.assertIs(simulador.advance(), ResultadoPasso.CONTINUA)
        self.assertEqual(simulador.timelines, [("accept", 2, "XX")])
        self.assertIs(simulador.advance(), ResultadoPasso.ACEITO)

    def test_input_outside_alphabet(self):
        simulador = carregado(tm_so_as(), TipoMaquina.TURING)
        with self.assertRaises(ErroEntrada):
            simulador.eval("aX")

    def test_step_limit(self):
        simulador = carregado(tm_em_laco(), TipoMaquina.TURING, max_passos=50)
        with self.assertLogs("core.simulador", level="WARNING"):
            avaliacao = simulador.eval("")
        self.assertFalse(avaliacao.result)
        self.assertIs(avaliacao.status, ResultadoPasso.TRAVADO)


class TestCasos(unittest.TestCase):
    def test_run_tests(self):
        simulador = carregado(dfa_par_de_as(), TipoMaquina.DFA)
        resultados = simulador.run_tests([CasoTeste("aa", True), CasoTeste("a", True), CasoTeste("b", True)])
        self.assertEqual([r.matched for r in resultados], [True, False, True])
        self.assertEqual([r.result for r in resultados], [True, False, True])

    def test_auto_compile(self):
        simulador = Simulador()
        maquina = simulador.compile(pda_anbn(), TipoMaquina.AUTO)
        self.assertIs(maquina.tipo, TipoMaquina.PDA)
        self.assertTrue(simulador.eval("ab").result)


if __name__ == "__main__":
    unittest.main()
