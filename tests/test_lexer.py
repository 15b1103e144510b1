import unittest

from pipesh.errors import ParseError, ShellSyntaxError
from pipesh.lexer import ShellLexer


class TestShellLexer(unittest.TestCase):
    def setUp(self):
        self.lexer = ShellLexer()

    def test_tokenize_cases(self):
        test_cases = [
            # Separadores
            ("echo hello world", ["echo", "hello", "world"]),
            ("  echo \t hello    world  ", ["echo", "hello", "world"]),
            ("", []),
            ("   ", []),
            # Comillas simples
            ("'a b'", ["a b"]),
            ("echo 'hello    world'", ["echo", "hello    world"]),
            ("'a\\b'", ["a\\b"]),
            ("'a\"b'", ['a"b']),
            # Comillas dobles
            ('"a\\"b"', ['a"b']),
            ('"a\\\\b"', ["a\\b"]),
            ('"\\$HOME"', ["$HOME"]),
            ('"a\\nb"', ["a\\nb"]),
            ("\"it's\"", ["it's"]),
            # Escapes fuera de comillas
            ("a\\ b", ["a b"]),
            ("a\\\\b", ["a\\b"]),
            ("\\'x\\'", ["'x'"]),
            ("abc\\", ["abc\\"]),
            # Concatenacion de fragmentos
            ("a'b'c", ["abc"]),
            ("'one'\"two\"three", ["onetwothree"]),
            ("echo '' x", ["echo", "", "x"]),
            ('""', [""]),
            # Los operadores se separan solo por espacios
            ("echo hi | cat", ["echo", "hi", "|", "cat"]),
            ("echo a|b", ["echo", "a|b"]),
            ("ls 2>> err.log", ["ls", "2>>", "err.log"]),
            ("echo '|'", ["echo", "|"]),
        ]

        for line, expected in test_cases:
            with self.subTest(line=line):
                self.assertEqual(self.lexer.tokenize(line), expected)

    def test_whitespace_round_trip(self):
        """Sin comillas ni barras, unir los tokens reproduce la linea colapsada"""
        for line in ["one  two   three", "\tls   -la  /tmp ", "single"]:
            with self.subTest(line=line):
                tokens = self.lexer.tokenize(line)
                self.assertEqual(" ".join(tokens), " ".join(line.split()))

    def test_unterminated_single_quote(self):
        with self.assertRaises(ShellSyntaxError):
            self.lexer.tokenize("echo 'abc")

    def test_unterminated_double_quote(self):
        with self.assertRaises(ParseError) as cm:
            self.lexer.tokenize('echo "abc')
        self.assertIn("matching `\"'", str(cm.exception))

    def test_lexer_is_reusable(self):
        """El estado no se arrastra entre llamadas"""
        self.assertEqual(self.lexer.tokenize("a b"), ["a", "b"])
        with self.assertRaises(ShellSyntaxError):
            self.lexer.tokenize("'open")
        self.assertEqual(self.lexer.tokenize("c"), ["c"])


if __name__ == "__main__":
    unittest.main()
