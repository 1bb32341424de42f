"""Endorser core: data model, validation, canonical encoding, signatures."""
