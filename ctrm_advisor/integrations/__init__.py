"""
External collaborators: text generation and feedback persistence.

Modules
-------
justification : JustificationGenerator — LLM prose with template fallback;
                never raises.
prompts       : Prompt templates for the generator.
sheets_sink   : SheetsWebAppSink / LogOnlySink + build_sink() — raise
                PersistenceError on failure.
"""
