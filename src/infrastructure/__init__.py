"""
Couche infrastructure de CineCat.

Ce module contient les implementations concretes des interfaces definies
dans la couche domaine (ports) :

- persistence/ : Stockage du catalogue en JSON (chargement, ecriture atomique)

Architecture hexagonale : les adapters ici implementent les ports du domaine,
permettant de changer le stockage sans modifier la logique metier.
"""
