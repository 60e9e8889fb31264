"""
Activation Server Django project.
"""
