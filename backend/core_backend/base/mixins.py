from rest_framework.viewsets import ViewSetMixin


class OptimizedQuerysetMixin(ViewSetMixin):
    """
    A ViewSet mixin that optimizes the queryset using the
    `select_related_fields` and `prefetch_related_fields` attributes
    declared on the current action's serializer Meta.
    """

    def _get_optimizations(self, serializer_class):
        meta = getattr(serializer_class, "Meta", None)
        if meta is None:
            return [], []
        return (
            list(getattr(meta, "select_related_fields", [])),
            list(getattr(meta, "prefetch_related_fields", [])),
        )

    def get_queryset(self):
        queryset = super().get_queryset()

        try:
            serializer_class = self.get_serializer_class()
        except (AttributeError, AssertionError):
            return queryset

        select_related, prefetch_related = self._get_optimizations(serializer_class)

        if select_related:
            queryset = queryset.select_related(*select_related)

        if prefetch_related:
            queryset = queryset.prefetch_related(*prefetch_related)

        return queryset
