"""
Infrastructure Layer

Adapters concretos (proveedores de completions, prompts versionados).
Los símbolos públicos se exportan desde `infrastructure.services` y
`infrastructure.prompts`; este módulo no tiene side effects.
"""
