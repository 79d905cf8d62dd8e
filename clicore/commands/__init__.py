"""The command tree.

This package provides:
- models: Node variants (HelpTopic, Leaf, Prefix, Alias) and CommandList
- parsing: Command name characters and word scanning
- lookup: Resolution of text to commands, abbreviations and ambiguity
- registry: CommandRegistry, the registration surface
"""
