"""
Library modules that support the splitter: types, configuration, delimiter patterns and source
adapters.
"""
