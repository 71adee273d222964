"""Command line interface for sabaccui-cli"""
