"""Application Layer.

Infrastructure and application services that orchestrate domain logic.
This layer handles I/O against the registries and builds the adapters the
domain services consume.
"""
