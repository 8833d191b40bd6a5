# src/flowresolve/core/__init__.py
"""
Core do flowresolve.

Este pacote contém a implementação canônica, independente de adapters, da
resolução de workflows: validação do documento, resolução de referências,
ordenação de jobs e a execução de referência do plano resolvido.

O core é projetado para ser:
    - determinístico
    - testável de forma isolada
    - livre de estado global (o Dataset Store pertence ao chamador)

Componentes principais:
    - config       → configuração (merge, validação, hashing)
    - document     → parsing YAML/JSON e hash do documento
    - workflow     → tipos, Schema Validator e Reference Resolver
    - engine       → Dependency Orderer, fachada de resolução e executor
    - run          → RunContext e resultados de execução
    - traceability → Manifest e Event Log

Limites explícitos:
    - Não depende de notebooks nem da CLI
    - Não executa nada durante a resolução
"""
