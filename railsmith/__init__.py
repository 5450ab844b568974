"""railsmith: scaffolds a pre-configured Rails application.

A Python take on a ``rails new -m template.rb`` template: an explicit,
ordered, fail-fast sequence of file writes, Gemfile edits and generator
commands.
"""

__version__ = "0.1.0"
