"""
Candidate provider.

Responsibilities:
- Geocode a free-text location with Photon (cached).
- Query OpenStreetMap Overpass for named places in a category around it.
- Normalise OSM elements into Candidate records with cuisine tags.
- De-duplicate chains and cap the list, preferring places with richer data.
"""
