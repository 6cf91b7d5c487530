from allocheck.rules.lifecycle import (
    enabled_rules,
    generate_rule_id,
    make_rule,
    remove_rule,
    toggle_rule,
)

__all__ = ["generate_rule_id", "make_rule", "toggle_rule", "remove_rule", "enabled_rules"]
