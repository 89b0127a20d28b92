"""Directives: flag-backed objectives that own overlords."""
