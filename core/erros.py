from typing import Dict, Optional


class ErroValidacaoMaquina(ValueError):
    """Falha estrutural ao validar ou compilar o grafo como um tipo de máquina."""
    def __init__(self, tipo, mensagem: str):
        self.tipo = tipo
        self.mensagem = mensagem
        super().__init__(f"Falha ao validar como {_nome(tipo)}: {mensagem}")


class ErroCondicao(ErroValidacaoMaquina):
    """Condição de transição fora da gramática do tipo (ou fora do alfabeto)."""
    def __init__(self, tipo, condicao: str, transicao, extra: str):
        self.condicao = condicao
        self.transicao = transicao
        super().__init__(
            tipo,
            f"Condição '{condicao}' entre '{transicao.src.label}' e '{transicao.dst.label}' {extra}."
        )


class ErroSimbolo(ErroValidacaoMaquina):
    """Símbolo com tamanho inválido ou desconhecido pelo alfabeto."""
    def __init__(self, tipo, simbolo: str, transicao, extra: str):
        self.simbolo = simbolo
        self.transicao = transicao
        super().__init__(
            tipo,
            f"Símbolo '{simbolo}' entre '{transicao.src.label}' e '{transicao.dst.label}' {extra}."
        )


class ErroInferencia(ValueError):
    """Nenhum dos tipos tentados pelo modo automático aceitou o grafo.

    `tentativas` guarda, na ordem em que foram tentados, o motivo de cada falha.
    """
    def __init__(self, tentativas: Optional[Dict] = None):
        self.tentativas = dict(tentativas or {})
        super().__init__("Não foi possível compilar como nenhum modelo de autômato; verifique a máquina e tente novamente.")


class ErroEntrada(ValueError):
    """Entrada com caractere fora do alfabeto da máquina compilada."""
    def __init__(self, caractere: str):
        self.caractere = caractere
        super().__init__(f"Caractere de entrada inválido '{caractere}'.")


class ErroSemMaquina(RuntimeError):
    """Simulação pedida sem nenhuma máquina carregada."""
    def __init__(self):
        super().__init__("Nenhuma máquina compilada.")


def _nome(tipo) -> str:
    return getattr(tipo, "value", str(tipo))
