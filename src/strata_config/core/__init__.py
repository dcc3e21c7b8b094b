# src/strata_config/core/__init__.py
"""
Core do Strata Config.

Componentes principais:
    - tree    → modelo de árvore de documento e codec YAML
    - merge   → composição determinística de documentos em camadas
    - secrets → detecção e mascaramento in-place de segredos
    - config  → fachada de carregamento, decodificação tipada e erros

Princípios fundamentais:
    - Algoritmos estruturais: operam sobre a forma da árvore e as tags
      de escalar, nunca sobre o significado dos campos
    - Execução síncrona, sem I/O nos engines de merge e redação
    - Toda falha é explícita e tipada
"""
