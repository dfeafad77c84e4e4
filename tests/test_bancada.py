import importlib.util
import unittest

TEM_TK = importlib.util.find_spec("tkinter") is not None


@unittest.skipUnless(TEM_TK, "tkinter indisponível")
class TestEntradasDaBancada(unittest.TestCase):
    def setUp(self):
        from gui import gui_bancada
        self.bancada = gui_bancada

    def test_parse_alphabet(self):
        self.assertIsNone(self.bancada.parse_alphabet("  "))
        self.assertEqual(self.bancada.parse_alphabet("ab"), {"a", "b"})
        self.assertEqual(self.bancada.parse_alphabet("a, b"), {"a", "b"})
        self.assertEqual(self.bancada.parse_alphabet("a b"), {"a", "b"})

    def test_parse_test_case(self):
        caso = self.bancada.parse_test_case("aab ; aceita")
        self.assertEqual((caso.input, caso.expected), ("aab", True))
        self.assertEqual(self.bancada.parse_test_case(" ; 0").input, "")
        with self.assertRaises(ValueError):
            self.bancada.parse_test_case("aab")
        with self.assertRaises(ValueError):
            self.bancada.parse_test_case("aab ; talvez")


if __name__ == "__main__":
    unittest.main()
