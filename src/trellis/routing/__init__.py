"""Routing — route tree manifest and trie-based resolution.

The tree is produced once (from JSON or patterns) and converted into an
immutable trie with O(path-depth) matching.
"""
