# Utils package for entity assets
