"""Default configuration values and starter .gitworktree.toml template."""

DEFAULT_TOML = """\
# gitworktree configuration
version = "1.0"

[diff]
context_size = 3                  # lines of context around each change
rename_similarity_threshold = 50  # percent similarity for rename detection
ignore_whitespace = false
no_prefix = false                 # true: respect diff.noprefix in ref-to-ref diffs

[output]
plain = false                     # true: never colour diff output

[runner]
timeout = 30                      # seconds per git invocation
"""
