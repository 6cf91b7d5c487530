from allocheck.parsing.fields import parse_int, parse_numeric_list, parse_phase_spec, split_tokens

__all__ = ["parse_int", "parse_numeric_list", "parse_phase_spec", "split_tokens"]
