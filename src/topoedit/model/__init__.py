"""
The MODEL layer contains the pure data structures of the graph core.
It has NO knowledge of the renderer, the bulk loader or the UI.
"""
