import unittest

from core.condicoes import (
    EPSILON,
    AcaoPilha,
    CondicaoPilha,
    Movimento,
    TipoMaquina,
    parse_condition,
    parse_pda_condition,
    parse_tm_condition,
)
from core.erros import ErroCondicao, ErroSimbolo, ErroValidacaoMaquina
from core.grafo import Grafo


class TestCondicoes(unittest.TestCase):
    def setUp(self):
        grafo = Grafo()
        a, b = grafo.add_node("p"), grafo.add_node("q")
        self.transicao = grafo.add_transition(a, b)

    def test_pda_push(self):
        condicao = parse_pda_condition("a b P c", self.transicao)
        self.assertEqual(condicao, CondicaoPilha("a", "b", AcaoPilha.PUSH, "c"))
        self.assertEqual(condicao.symbol, "a")
        self.assertEqual(condicao.read_stack_symbol, "b")
        self.assertEqual(condicao.action_stack_symbol, "c")

    def test_pda_pop_and_long_forms(self):
        self.assertIs(parse_pda_condition("a b p c", self.transicao).action, AcaoPilha.POP)
        self.assertIs(parse_pda_condition("a b Pop c", self.transicao).action, AcaoPilha.POP)
        self.assertIs(parse_pda_condition("a b Push c", self.transicao).action, AcaoPilha.PUSH)

    def test_pda_invalid_action(self):
        with self.assertRaises(ErroCondicao) as ctx:
            parse_pda_condition("a b X c", self.transicao)
        self.assertIn("'p'", str(ctx.exception))
        self.assertIn("'p' e 'q'", str(ctx.exception))

    def test_pda_shape(self):
        with self.assertRaises(ErroCondicao):
            parse_pda_condition("a b P", self.transicao)
        with self.assertRaises(ErroSimbolo):
            parse_pda_condition("ab b P c", self.transicao)

    def test_tm(self):
        condicao = parse_tm_condition("a b R", self.transicao)
        self.assertEqual((condicao.read_symbol, condicao.write_symbol), ("a", "b"))
        self.assertIs(condicao.movement, Movimento.DIREITA)
        self.assertIs(parse_tm_condition("a b N", self.transicao).movement, Movimento.NENHUM)
        self.assertEqual(str(parse_tm_condition("x y L", self.transicao)), "x y L")

    def test_tm_invalid(self):
        with self.assertRaises(ErroCondicao):
            parse_tm_condition("a b Q", self.transicao)
        with self.assertRaises(ErroCondicao):
            parse_tm_condition("a b R x", self.transicao)
        with self.assertRaises(ErroSimbolo):
            parse_tm_condition("a bb R", self.transicao)

    def test_fa_single_character(self):
        self.assertEqual(parse_condition(TipoMaquina.DFA, "a", self.transicao), "a")
        for ruim in ("", "ab"):
            with self.assertRaises(ErroSimbolo):
                parse_condition(TipoMaquina.NFA, ruim, self.transicao)

    def test_epsilon_only_for_nfa(self):
        self.assertEqual(parse_condition(TipoMaquina.NFA, EPSILON, self.transicao), EPSILON)
        with self.assertRaises(ErroCondicao) as ctx:
            parse_condition(TipoMaquina.DFA, EPSILON, self.transicao)
        self.assertIs(ctx.exception.tipo, TipoMaquina.DFA)
        self.assertIsInstance(ctx.exception, ErroValidacaoMaquina)
        self.assertIsInstance(ctx.exception, ValueError)

    def test_auto_has_no_grammar(self):
        with self.assertRaises(ValueError):
            parse_condition(TipoMaquina.AUTO, "a", self.transicao)

    def test_tipo_from_str(self):
        self.assertIs(TipoMaquina.from_str("Turing Machine"), TipoMaquina.TURING)
        self.assertIs(TipoMaquina.from_str("PDA"), TipoMaquina.PDA)
        with self.assertRaises(ValueError):
            TipoMaquina.from_str("Mealy")


if __name__ == "__main__":
    unittest.main()
