"""api tests"""
