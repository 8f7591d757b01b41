"""
The MODEL layer contains pure data structures and geometry.
It has NO knowledge of the event loop (Qt) or of the renderer.
It deals with Platforms, Exhibits, Layout and Viewpoints.
"""
