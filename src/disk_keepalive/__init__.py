"""Keep mechanical drives from parking their heads during short idle gaps."""
