"""
Commands - Handlers des commandes chat (!spotify, !play, !skip, !prev, simples)
"""
