"""Colibri conference description and Octo relay reconciliation."""
