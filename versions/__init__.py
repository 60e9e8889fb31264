"""
Versions module - firmware and software releases of a product.

Software versions reference the features they ship and the firmware
versions they run on, both with replace-all semantics.
"""
