"""
Terminal output for the CLI.

Modules
-------
formatters : Plain-text renderers for answers, the catalog, recommendations,
             and the per-rule-group score table.
"""
