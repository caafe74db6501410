"""Application services for the kodata CLI.

Services implement the use cases, coordinating between the core types
(core/) and infrastructure (tools/, platform/).
"""
