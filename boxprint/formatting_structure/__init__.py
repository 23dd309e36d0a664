"""Box tree: the boxes generated by the styled tree, before and after layout.

:mod:`build` turns the styled tree into boxes, :mod:`boxes` defines them
with their geometry.

"""
