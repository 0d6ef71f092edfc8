"""repository tests"""
