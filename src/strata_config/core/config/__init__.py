# src/strata_config/core/config/__init__.py
"""
Fachada de configuração do Strata Config.

Este pacote conecta as peças do core para carregar uma configuração
tipada a partir de documentos em camadas e re-serializá-la com ou sem
segredos.

Responsabilidades do pacote:
    - Expansão de templates das fontes (Jinja2)
    - Leitura de streams e arquivos
    - Composição das fontes via engine de merge
    - Decodificação tipada (pydantic) e hook de validação
    - Hash canônico da configuração resolvida
    - Hierarquia de exceções da biblioteca

Invariantes:
    - Nenhuma configuração parcial é retornada
    - Conflitos estruturais entre fontes são tratados como erro

Limites explícitos:
    - Não interpreta o significado dos campos de configuração
    - Não faz parse completo de linha de comando
"""
