"""
Example 02: Repository Pattern

This example persists models through a Repository and resolves references
lazily. It needs a running MongoDB; set MONGOHQ_URL, for example:

    MONGOHQ_URL=mongodb://localhost:27017/doc_query_example python 02_repository.py
"""

from doc_query import ConnectionManager, Model, Repository, Settings, configure_logging, field


class Author(Model):
    __collection__ = "authors"

    @classmethod
    def declare_types(cls):
        return {"name": field(str)}


class Book(Model):
    __collection__ = "books"

    @classmethod
    def declare_types(cls):
        return {
            "title": field(str),
            "year": field(int),
            "author": field(Author),
        }


class BookRepository(Repository[Book]):
    """Repository for Book entities"""

    model_class = Book

    def by_author(self, author: Author):
        return self.find({"author._id": author._id}, sort={"year": 1})


def main():
    settings = Settings()
    configure_logging(settings.log_level)

    with ConnectionManager(settings.connection_config()) as store:
        authors = Repository(store, Author)
        books = BookRepository(store)

        print("=== Repository Pattern ===\n")

        # Insert
        print("1. Save an author and two books:")
        author = authors.save(Author(name="Ursula"))
        books.save(Book(title="Earthsea", year=1968, author=author.reference()))
        books.save(Book(title="Dispossessed", year=1974, author=author.reference()))
        print(f"   Author id: {author._id}\n")

        # Query
        print("2. Books by author:")
        for book in books.by_author(author):
            # book.author is a Reference; attribute access fetches it once
            print(f"   - {book.title} ({book.year}) by {book.author.name}")
        print()

        # Paginate
        print("3. First page of one:")
        page = books.paginate(page=0, per_page=1, sort={"year": 1})
        print(f"   {[b.title for b in page]}, total {page.count}, next page {page.next_page()}\n")

        # Update
        print("4. Update a book:")
        book = books.find_one({"title": "Earthsea"})
        book.title = "A Wizard of Earthsea"
        books.save(book)
        print(f"   Now: {books.find_by_id(book._id).title}\n")

        # Remove
        print("5. Clean up:")
        books.remove({"author._id": author._id})
        authors.remove(author)
        print(f"   Remaining books: {books.count()}\n")


if __name__ == "__main__":
    main()
