"""clicore - command registration, lookup and dispatch for debugger-style REPLs.

Provides a tree of commands with prefixes, aliases and abbreviations, a
runtime-checked setting abstraction backing the set/show commands, and
command repetition with reentrancy-safe hooks.
"""
