from linking.normalizer import EventLinkNormalizer
from linking.restoration import CastLinkNormalizer
from report import Fight


class Analyzer:
    LINK_CONFIGS = {
        "Default": EventLinkNormalizer,
        "Restoration": CastLinkNormalizer,
    }

    def __init__(self, fight: Fight, spec: str = None):
        self._fight = fight
        self._spec = spec if spec in self.LINK_CONFIGS else "Default"
        self._normalizer = self.LINK_CONFIGS[self._spec](fight.combatant)
        self._events = self._filter_events()

    @property
    def spec(self):
        return self._spec

    def _filter_events(self):
        """Remove any events neither the player nor their pets took part in"""
        involved = {self._fight.source.id, *self._fight.source.pets}

        return [
            event
            for event in self._fight.events
            if event.source_id in involved or event.target_id in involved
        ]

    def analyze(self):
        for event in self._events:
            self._normalizer.preprocess_event(event)
        relations = self._normalizer.normalize()

        return {
            "fight_metadata": {
                "source": self._fight.source.name,
                "encounter": self._fight.encounter_name,
                "start_time": self._fight.start_time,
                "end_time": self._fight.end_time,
                "duration": self._fight.duration,
            },
            "spec": self._spec,
            # relations below are keyed by position in this list
            "events": [
                event.model_dump(mode="json", by_alias=True, exclude_none=True)
                for event in relations.events
            ],
            "relation_counts": {
                relation: relations.count(relation)
                for relation in relations.relation_names()
            },
            "relations": relations.to_dict(),
        }


def analyze(fight: Fight, spec: str = None):
    analyzer = Analyzer(fight, spec)
    return analyzer.analyze()
