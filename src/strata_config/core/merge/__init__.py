# src/strata_config/core/merge/__init__.py
"""
Engine de merge do Strata Config.

Compõe documentos em camadas (base + overlays) sobre o modelo de
árvore de documento, com regras determinísticas por tipo de nó.

Componentes principais:
    - merge_nodes → merge de um par (base, overlay)
    - merge_all   → fold estrito da esquerda para a direita
"""

from strata_config.core.merge.engine import merge_all, merge_nodes

__all__ = ["merge_all", "merge_nodes"]
