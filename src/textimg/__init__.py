"""Document persistence and asset lifecycle core of the TextImg editor"""
