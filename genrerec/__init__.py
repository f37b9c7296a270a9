"""Genre-similarity movie recommender over MovieLens 100k (u.item / u.data).

Core idea:
- Parse the pipe-delimited catalog into movies with genre sets decoded from 18 flag columns
- Parse the tab-delimited ratings log (loaded and summarised, not used for scoring)
- Rank every other movie by Jaccard similarity of genre sets against the liked movie
"""
