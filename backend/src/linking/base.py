class BasePreprocessor:
    def preprocess_event(self, event):
        raise NotImplementedError
