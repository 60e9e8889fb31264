"""
Devices module - licensed devices and their activation files.

This module handles:
- Device registration, single and batch, with globally unique serial numbers
- License type reassignment, single and batch across products
- Building signed, encrypted activation files for a device
"""
