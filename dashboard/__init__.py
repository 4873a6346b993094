"""CBS supervision dashboard"""
