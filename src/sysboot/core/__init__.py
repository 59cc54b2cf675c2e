# src/sysboot/core/__init__.py
"""
Core do SysBoot.

Componentes principais:
    - config    → árvore de configuração YAML (diretivas, loader, hashing)
    - sync      → primitivos de sincronização (AsyncFifoLock)
    - behavior  → registro e disparo de behaviors
    - cache     → cache de arquivos com TTL
    - subsystem → tipos, planejamento e registro de subsistemas
    - system    → bootstrap canônico

Princípios fundamentais:
    - Nenhuma decisão silenciosa: todo comportamento é explícito e testado
    - Dependências são injetadas, não lidas de estado global
"""
