"""
Shell-completion predicates.

Every binding carries a predictor describing which values make sense for it.
The parser never consults them; a shell-completion integration reads the
merged table from FlagSets.completions() and calls ``predict(last)`` where
``last`` is the word currently being completed.

Predictors
- PredictAnything: any value, no suggestions.
- PredictNothing: the flag takes no value (booleans).
- PredictSet(*options): a closed set of values.
- PredictFiles(pattern) / PredictDirs(pattern): filesystem paths.
- PredictOr(*predictors): union of several predictors.
"""
import fnmatch
import os


class Predictor:
    """
    Base predictor: suggests nothing.
    """

    def predict(self, last=""):
        return []

    def __repr__(self):
        return "%s()" % type(self).__name__


class _Anything(Predictor):
    pass


class _Nothing(Predictor):
    pass


class PredictSet(Predictor):
    def __init__(self, *options):
        self.options = tuple(options)

    def predict(self, last=""):
        return [option for option in self.options if option.startswith(last)]

    def __repr__(self):
        return "PredictSet(%s)" % ", ".join(map(repr, self.options))


class PredictFiles(Predictor):
    """
    Suggest directories (to descend into) and files whose name matches pattern.
    """
    directories_only = False

    def __init__(self, pattern="*"):
        self.pattern = pattern

    def predict(self, last=""):
        directory, prefix = os.path.split(last)
        try:
            entries = sorted(os.listdir(directory or "."))
        except OSError:
            return []

        matches = []
        for entry in entries:
            if not entry.startswith(prefix):
                continue
            path = os.path.join(directory, entry)
            if os.path.isdir(path):
                matches.append(path + os.sep)
            elif not self.directories_only and fnmatch.fnmatch(entry, self.pattern):
                matches.append(path)
        return matches

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self.pattern)


class PredictDirs(PredictFiles):
    directories_only = True


class PredictOr(Predictor):
    def __init__(self, *predictors):
        self.predictors = tuple(predictors)

    def predict(self, last=""):
        matches = []
        for predictor in self.predictors:
            for match in predictor.predict(last):
                if match not in matches:
                    matches.append(match)
        return matches


PredictAnything = _Anything()
PredictNothing = _Nothing()


__all__ = (
    "Predictor",
    "PredictAnything",
    "PredictNothing",
    "PredictSet",
    "PredictFiles",
    "PredictDirs",
    "PredictOr",
)
