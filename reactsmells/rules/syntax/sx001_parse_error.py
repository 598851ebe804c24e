from reactsmells.rules.base import Rule


class SX001(Rule):
    # emitted by the engine itself when a file does not parse
    rule_id = "SX001"
    name = "parse-error"
    title = "File could not be parsed"
    category = "syntax"
    severity = "error"
    description = "The source contains a syntax error, so no other rule was evaluated for this file."
    recommendation = "Fix the syntax error and re-run the checker."
