# src/strata_config/core/config/errors.py
"""
Exceções canônicas do Strata Config.

Este módulo define a hierarquia oficial de exceções utilizadas durante
o carregamento, a expansão de templates, o merge de árvores de documento
e a decodificação tipada da configuração.

As exceções aqui definidas representam **falhas estruturais ou de entrada**,
nunca falhas transitórias: nenhuma delas é passível de retry.

Princípios fundamentais:
    - Exceções são tipadas e semânticas
    - Toda falha aborta o carregamento inteiro (sem configuração parcial)
    - Erros de bibliotecas externas são encadeados via `raise ... from`

Invariantes:
    - Todas as exceções herdam de `ConfigError`
    - Erros de merge herdam de `MergeError` e carregam o caminho da chave

Limites explícitos:
    - Não realiza fallback ou recovery
    - O engine de redação não levanta exceções deste módulo
"""

from __future__ import annotations

from typing import Sequence, Tuple


class ConfigError(Exception):
    """
    Exceção base para todos os erros do Strata Config.

    Permite captura genérica de qualquer falha de carregamento,
    merge, decodificação ou validação.
    """


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------

class MergeError(ConfigError):
    """
    Exceção base para falhas do engine de merge.

    Carrega o caminho (`path`) até o ponto da árvore onde a falha ocorreu.
    O caminho é uma tupla de textos de chave, vazia no nível raiz.
    """

    def __init__(self, message: str, path: Sequence[str] = ()) -> None:
        self.path: Tuple[str, ...] = tuple(path)
        if self.path:
            message = f"{message} (caminho: {format_path(self.path)})"
        super().__init__(message)


class MissingOperandError(MergeError):
    """Merge invocado com uma árvore ausente (`None`) em algum dos lados."""


class KindMismatchError(MergeError):
    """
    Exceção levantada quando duas árvores possuem formas incompatíveis.

    Exemplo de conflito:
        - base:    {"a": 1}
        - overlay: ["x"]

    O engine nunca converte uma forma em outra silenciosamente.
    """


class NestedKindMismatchError(KindMismatchError):
    """
    Conflito de forma alcançado durante o merge profundo de um mapping.

    Exemplo de conflito:
        - base:    {"o": {"k": 1}}
        - overlay: {"o": 4}
    """


class ScalarTagMismatchError(MergeError):
    """Dois escalares com tags diferentes (ex.: `!!str` sobre `!!int`)."""


class EmptyDocumentError(MergeError):
    """Um nó Document sem conteúdo raiz participou de um merge."""


# ---------------------------------------------------------------------------
# Carregamento
# ---------------------------------------------------------------------------

class NoSourcesError(ConfigError):
    """Nenhuma fonte de configuração foi informada."""


class SourceNotFoundError(ConfigError):
    """Um arquivo de configuração informado não existe."""


class SourceReadError(ConfigError):
    """Falha de leitura de uma fonte (stream ou arquivo)."""


class TemplateRenderError(ConfigError):
    """
    Falha na expansão de template de uma fonte.

    Inclui erros de sintaxe, variáveis indefinidas e falhas explícitas
    de `required`.
    """


class EmptySourceError(ConfigError):
    """A fonte não contém nenhum documento após a expansão do template."""


class DecodeError(ConfigError):
    """
    Falha ao decodificar texto em árvore ou árvore em valor tipado.

    Cobre tanto erros de sintaxe YAML quanto erros de conversão
    para o tipo de destino.
    """


class ValidationFailedError(ConfigError):
    """O hook de validação rejeitou o valor decodificado."""


def format_path(path: Sequence[str]) -> str:
    """Formata um caminho de chaves como `a.b.c`."""
    return ".".join(path) if path else "<raiz>"
