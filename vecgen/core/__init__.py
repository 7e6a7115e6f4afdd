"""Generation engine: seeding, palettes, fills, composition and output"""
