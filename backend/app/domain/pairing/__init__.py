"""Pairing: invite codes and the two-member couple relation."""
