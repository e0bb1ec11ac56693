"""Services Layer — command dispatch and the bundled formula/sync table packs."""
